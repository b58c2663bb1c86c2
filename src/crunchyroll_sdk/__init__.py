"""Crunchyroll SDK — typed async client for the Crunchyroll web API."""

from crunchyroll_sdk.client import Crunchyroll
from crunchyroll_sdk.errors import (
    CrunchyrollError,
    DecodeError,
    ExternalError,
    InputError,
    InternalError,
    NetworkError,
    RequestError,
)
from crunchyroll_sdk.executor import Executor, ExecutorDetails
from crunchyroll_sdk.pagination import Pagination

__all__ = [
    "Crunchyroll",
    "CrunchyrollError",
    "DecodeError",
    "Executor",
    "ExecutorDetails",
    "ExternalError",
    "InputError",
    "InternalError",
    "NetworkError",
    "Pagination",
    "RequestError",
]
