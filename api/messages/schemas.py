"""
Pydantic schemas for message board endpoints.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class CreateMessageRequest(BaseModel):
    """
    Raw create body. Field checks run in the service, in a fixed order.
    """

    model_config = ConfigDict(extra="ignore")

    name: Any = None
    message: Any = None
    priority: Any = None
