"""
Top-level package for the Rewardo deployment tooling.

Release orchestration for the search API lives under
`rewardo_deploy.release_build`; installing the project exposes the
`rewardo-release` console script.
"""

__all__: list[str] = []
