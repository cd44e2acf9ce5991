from setuptools import find_packages, setup

setup(
    name="cinegraph",
    version="0.1.0",
    description="Movie metadata graphs with similarity scoring and force-directed layouts",
    packages=find_packages(include=["cinegraph", "cinegraph.*"]),
    include_package_data=True,
    package_data={"cinegraph": ["templates/*.j2"]},
    python_requires=">=3.11",
    install_requires=[
        "pydantic>=2",
        "PyYAML>=6",
        "Jinja2>=3",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "console_scripts": ["cinegraph=cinegraph.cli:main"],
    },
)
