"""This module serves as the initialization file for the core package of the portfolio generator.

It groups configuration, password hashing, session management, authentication
dependencies, and the application error hierarchy.

Attributes:
    - None

Notes:
    1. This file is intentionally empty as it is used to initialize the package.
    2. The core functionality is organized in submodules within the core directory.

"""
