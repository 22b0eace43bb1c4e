# /run.py
import os

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv()

from carepoint import create_app
from carepoint.extensions import socketio

app = create_app(os.environ.get('FLASK_CONFIG'))

if __name__ == '__main__':
    host = os.environ.get('HOST', '127.0.0.1')
    port = int(os.environ.get('PORT', 5000))
    print(f"Starting CarePoint on {host}:{port}...")
    socketio.run(app, host=host, port=port, debug=app.debug, allow_unsafe_werkzeug=True)
