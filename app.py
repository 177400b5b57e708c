# app.py
import logging
import os

from dotenv import load_dotenv
load_dotenv()
from flask import Flask
from flask_compress import Compress
from flask_cors import CORS
from routes_estimate import estimate_bp

logging.basicConfig(level=logging.INFO)


def create_app():
    app = Flask(__name__)
    Compress(app)
    CORS(app)
    app.register_blueprint(estimate_bp)
    return app

app = create_app()

if __name__ == '__main__':
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5001)), debug=False)
