"""End-to-end tests driving the ``tripatch`` CLI through Click's CliRunner."""
