"""Record imported by the command-line tests."""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, Field

from envbind.tags import Env


class ServiceSettings(BaseModel):
    host: Annotated[str, Env("name:SAMPLE_HOST", help="bind address")] = "127.0.0.1"
    port: Annotated[int, Env("name:SAMPLE_PORT,required", help="listen port")] = 0
    tags: Annotated[list[str], Env("name:SAMPLE_TAGS")] = Field(default_factory=list)

    def description(self) -> str:
        return "sample service"


class BrokenSettings(BaseModel):
    value: Annotated[int, Env("bogus")] = 0


default_settings = ServiceSettings(host="10.0.0.1")
