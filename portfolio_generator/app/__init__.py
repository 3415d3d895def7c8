"""This module serves as the entry point for the portfolio generator application.

It initializes and exposes the core functionality of the application, including
database setup, session handling, and application configuration.

Attributes:
    None

Notes:
    1. This module does not contain any functions or classes of its own.
    2. The actual application logic is defined in other modules, such as:
       - app.core.config: Contains application settings and configuration.
       - app.core.sessions: Issues and expires server-side login sessions.
       - app.database.database: Manages database engine and session creation.
       - app.models: Defines the User and Portfolio models.
       - app.api.routes: Defines the JSON API for accounts and portfolios.
    3. No disk, network, or database access occurs in this module directly.

"""
