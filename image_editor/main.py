from __future__ import annotations
from dotenv import load_dotenv

if __name__ == "__main__":
    load_dotenv()
    from image_editor.presentation.http.server import create_app

    app = create_app()
    s = app.container.settings
    app.run(host=s.app_host, port=s.app_port, debug=s.app_debug)
