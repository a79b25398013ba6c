"""deeptrace - Package Setup"""

import re
from pathlib import Path

from setuptools import setup, find_packages

__version__ = re.search(
    r'^__version__ = "([^"]+)"',
    (Path(__file__).parent / "deeptrace" / "__init__.py").read_text(encoding="utf-8"),
    re.M,
).group(1)

setup(
    name="deeptrace",
    version=__version__,
    description="Deep mutation tracing for nested dicts, lists and objects",
    author="deeptrace Contributors",
    python_requires=">=3.10",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    package_data={
        "deeptrace": [
            "config/*.yaml",
        ],
    },
    entry_points={
        "console_scripts": [
            "deeptrace=deeptrace.main:main",
        ],
    },
    install_requires=[
        "pydantic>=2.9.0",
        "pyyaml>=6.0.2",
        "rich>=13.9.0",
    ],
    extras_require={
        "test": ["pytest>=8.0"],
    },
)
