"""Main entry point for the application."""

import os

from groupfit import create_app

app = create_app()


if __name__ == "__main__":
    port = int(os.environ.get("PORT") or 3000)
    app.run(debug=True, host="0.0.0.0", port=port)  # nosec
