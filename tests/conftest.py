"""Shared fixtures for the whole suite."""

from tests.fixtures import *  # noqa: F401,F403
