from apex_log_links.cli import app

if __name__ == "__main__":  # pragma: no cover
    app()
