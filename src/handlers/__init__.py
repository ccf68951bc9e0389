"""Lambda handlers; ``handlers.main.lambda_handler`` is the API entrypoint."""
