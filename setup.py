from setuptools import setup, find_packages

setup(
    name="band-romance-engine",
    version="0.1.0",
    description="Relationship progression engine for a band-management simulation",
    author="Band Romance Engine Developer",
    python_requires=">=3.11",
    packages=find_packages(include=["romance_engine", "romance_engine.*"]),
    install_requires=[
        "pydantic>=2.5.0",
        "numpy>=1.24.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
        ]
    },
    entry_points={
        "console_scripts": [
            "romance-sim=romance_engine.cli:main",
        ],
    },
)
