"""tripatch test suite.

Folder taxonomy
- unit/         : Isolated, fast checks of a single module/class/function. No real I/O.
- contract/     : Behavior every storage backend and upsert strategy must share,
                  parametrized over SQLite (file) and PostgreSQL.
- integration/  : Migrations and application wiring against a real database.
- e2e/          : The ``tripatch`` command line driven through Click's CliRunner.
- fixtures/     : Shared pytest fixtures (loaded via ``pytest_plugins``).
- helpers/      : Shared utilities (no tests here).

PostgreSQL-backed tests need Docker (Testcontainers) and are skipped without it.
"""
