import os

from moneyflow import create_app

app = create_app()

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 3333))
    app.run(
        host="0.0.0.0",
        port=port,
        debug=os.environ.get("FLASK_DEBUG", "false").lower() == "true",
    )
