"""Infrastructure layer — subprocesses, filesystem, templates, releases."""
