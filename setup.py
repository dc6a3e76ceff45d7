# setup.py
from setuptools import setup, find_packages

install_requires = [
    # --- MODELS & CONFIG ---
    "pydantic>=2.0.0",
    "python-dotenv>=1.0.0",
    "pyyaml>=6.0.0",

    # --- CLI ---
    "typer>=0.9.0",
    "rich>=13.0.0",
]

extras_require = {
    # --- TESTS---
    "test": [
        "pytest-asyncio==1.3.0",
        "pytest",
    ],
}

setup(
    name="ProjectNavigator",
    version="0.3.0",
    description="ProjectNavigator|swipe navigation and interactive dismissal",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"projnav": ["shared/config/settings/*.yaml"]},
    include_package_data=True,
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={"console_scripts": ["projnav=projnav.navigator.main:cli_main"]},
    python_requires=">=3.11",
)
