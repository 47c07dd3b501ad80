"""Main CLI application using Cyclopts.

Every users/audit command runs one unit of work against the configured
database. Acting users are named with --as and resolved from the user store.
"""

import cyclopts

from warden.cli.commands import audit, catalog, db, users

app = cyclopts.App(
    name="warden",
    help="Warden - role-based access control for the admin",
)

app.command(users.app, name="users")
app.command(audit.app, name="audit")
app.command(db.app, name="db")
app.command(catalog.roles, name="roles")
app.command(catalog.permissions, name="permissions")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
