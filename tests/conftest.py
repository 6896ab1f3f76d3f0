"""Shared test fixtures for polar-lang.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

import pytest


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "polar_lang"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"


@pytest.fixture()
def sample_policy() -> str:
    """Return a small policy exercising every kind of file-level line."""
    return '''# sample policy
actor User {}

resource Repository {
  permissions = ["read", "push"];
  roles = ["contributor", "maintainer"];
  relations = {parent: Organization};

  "read" if "contributor";
  "push" if "maintainer";
  "contributor" if "member" on "parent";
}

type has_role(user: User, role: String, repo: Repository);

has_role(user: User, "maintainer", repo: Repository) if
  repo.owner_id = user.id;

allow(actor, action, resource) if
  has_permission(actor, action, resource) and
  not actor.banned;

allow(_: User{admin: true}, _action, _resource);

?= allow(new User(name: "alice"), "read", new Repository(id: 1));
'''
