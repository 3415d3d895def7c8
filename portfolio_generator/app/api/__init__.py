"""
This package holds the JSON API of the portfolio generator.

Notes:
    1. Routes are defined in `api.routes` and mounted by `app.main.create_app`.
    2. Route handlers stay thin; persistence, uploads, rendering and PDF export
       live in `api.routes.route_logic`.
    3. Protected endpoints depend on `core.auth.get_current_user_id`, which
       resolves the server-side session from the request cookie.
    4. Database sessions are injected through `database.database.get_db`.

"""
