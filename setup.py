"""Setup configuration for the todo TUI."""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="todo-tui",
    version="0.1.0",
    description="Keyboard-driven, mode-based todo list for the terminal",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Todo TUI Team",
    python_requires=">=3.9",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["cli"],
    install_requires=[
        "pypubsub>=4.0.3",
        "rich>=13.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "todo-tui=cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Environment :: Console",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Utilities",
    ],
)
