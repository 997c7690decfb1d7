"""Shared path parameter types"""
from typing import Annotated

from fastapi import Path

from tasktracker.schemas.common import MAX_ID

# Out-of-range ids fail validation instead of overflowing the driver.
IdPath = Annotated[int, Path(ge=1, le=MAX_ID)]
