from setuptools import setup, find_packages

setup(
    name="templight",
    version="0.1.0",
    description="Syntax highlighting grammar and plain-text rewriter for templ templates",
    author="templight Team",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    python_requires=">=3.11",
    install_requires=[
        "watchdog",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "templight=templight_cli.main:main",
        ],
    },
)
