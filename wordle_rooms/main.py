"""
Wordle Rooms Server - Main Entry Point

Creates the Flask-SocketIO application, starts the room cleanup worker and
runs the server.
"""

import threading
import time

from . import create_app
from .config import Config, get_word_statistics, validate_word_list_integrity
from .utils.game_logger import game_logger
from .websocket.handlers import broadcast_sweep_report


def room_cleanup_worker(app, socketio, interval_seconds):
    """
    Background worker that periodically sweeps the room registry.

    Disconnected players past their grace period are dropped, and rooms that
    are empty or idle past their timeout are deleted.
    """
    print("Room cleanup worker started")
    registry = app.extensions['room_registry']
    while True:
        try:
            with app.app_context():
                report = registry.sweep()
                if report.changed:
                    print(f"Room cleanup: removed {len(report.rooms_deleted)} room(s), "
                          f"{report.players_removed} idle player(s)")
                    broadcast_sweep_report(socketio, registry, report)
        except Exception as e:
            game_logger.logger.error(f"Error in room cleanup worker: {e}")

        time.sleep(interval_seconds)


def main():
    """Main function to initialize services and start the server."""
    try:
        print("Initializing services...")

        validate_word_list_integrity()
        print(f"✓ Word list loaded ({get_word_statistics()['total_words']} words)")

        # Create Flask app
        print("Creating Flask application...")
        app, socketio = create_app(Config)
        print("✓ Flask application created successfully")

        # Start room cleanup worker in background thread
        cleanup_thread = threading.Thread(
            target=room_cleanup_worker,
            args=(app, socketio, Config.CLEANUP_INTERVAL_SECONDS),
            daemon=True
        )
        cleanup_thread.start()
        print(f"✓ Room cleanup worker started - checking every {Config.CLEANUP_INTERVAL_SECONDS} seconds")

        game_logger.logger.info("Wordle Rooms Server Starting")

        print(f"\nStarting Wordle Rooms Server on {Config.HOST}:{Config.PORT}")
        print(f"Debug mode: {Config.DEBUG}")
        print(f"Round advance policy: {Config.ROUND_ADVANCE_POLICY}")
        print("=" * 50)

        socketio.run(app, host=Config.HOST, port=Config.PORT, debug=Config.DEBUG,
                     allow_unsafe_werkzeug=True)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("Wordle Rooms Server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise


if __name__ == '__main__':
    main()
