"""
Setup script for recall-curve.

Recall schedules reminders for memorized content along the forgetting
curve. It serves three roles:

1. Scheduling engine - reminder timelines, night-window postponement and
   review-driven interval adaptation
2. Flashcard companion - quick review sessions from the terminal
3. Local reminder queue - pending alerts kept in SQLite between runs

The 'recall' command is the entry point.
"""

from setuptools import find_packages, setup

setup(
    name="recall-curve",
    version="1.0.0",
    description="Forgetting-curve reminder scheduling with night-window postponement",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(include=["recall", "recall.*"]),
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Database
        "sqlalchemy>=2.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "recall=recall.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Education",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
    ],
    keywords="learning spaced-repetition forgetting-curve reminders cli",
)
