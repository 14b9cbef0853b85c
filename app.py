"""Development entrypoint: ``flask run`` or ``python app.py``."""

from src.hr_backoffice.hr_backoffice.main import create_app

app = create_app()

if __name__ == "__main__":
    app.run(debug=app.config["DEBUG"])
