# app.py
"""
Thin runner that uses the unified factory and runs Socket.IO.
"""
from idlerealms import create_app, socketio

app = create_app()

if __name__ == "__main__":
    socketio.run(app, host="0.0.0.0", port=5000, debug=True)
