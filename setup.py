# setup.py
from setuptools import setup, find_packages

install_requires = [
    # --- STATE & VALIDATION ---
    "pydantic>=2.0.0",

    # --- CONFIGURATION ---
    "python-dotenv>=1.0.0",
    "pyyaml>=6.0.0",
]

extras_require = {
    # --- TESTS ---
    "test": [
        "pytest-asyncio==1.3.0",
        "pytest",
    ],
}

setup(
    name="splatcad-sync",
    version="0.1.0",
    description="splatcad project state synchronization",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={
        "console_scripts": [
            "splatcad-sync=splatcad.client.main:main",
        ],
    },
    python_requires=">=3.11",
)
