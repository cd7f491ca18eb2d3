try:
    from backend.planpoker.server import create_app
except ImportError:  # pragma: no cover
    from planpoker.server import create_app

app, socketio = create_app()
