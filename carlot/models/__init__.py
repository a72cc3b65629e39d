"""
Models package.

Importing this package imports every model module so that all tables are
registered on Base.metadata (Alembic env and create_all rely on it).
"""

from __future__ import annotations

# NOTE:
# the imports exist for their side effect (table registration), hence noqa.

from carlot.models import user  # noqa: F401
from carlot.models import car  # noqa: F401
from carlot.models import expense  # noqa: F401
from carlot.models import user_setting  # noqa: F401
from carlot.models import revoked_token  # noqa: F401
