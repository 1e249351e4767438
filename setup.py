"""
Custom setup.py to exclude pygame-dependent files from the wheel.

viewer.py and __main__.py require pygame, which headless hosts that only
drive the field engine do not install. They are only needed for local
interactive use (pip install flower-field[viewer]).
"""

from setuptools import find_packages, setup
from setuptools.command.build_py import build_py as _build_py


# Files that require pygame and should not be packaged in the wheel.
_EXCLUDE_MODULES = {"viewer", "__main__"}


class BuildPy(_build_py):
    """Custom build_py that excludes pygame-dependent modules."""

    def find_package_modules(self, package, package_dir):
        modules = super().find_package_modules(package, package_dir)
        return [
            (pkg, mod, path)
            for (pkg, mod, path) in modules
            if mod not in _EXCLUDE_MODULES
        ]


setup(
    name="flower-field",
    version="0.1.0",
    description="Audio-reactive procedural flower field: lifecycle engine, "
                "petal/stem geometry and falling petal physics",
    python_requires=">=3.8",
    package_dir={"": "plugins"},
    packages=find_packages(where="plugins"),
    install_requires=["numpy"],
    extras_require={
        "viewer": ["pygame"],
        "test": ["pytest"],
    },
    cmdclass={"build_py": BuildPy},
)
