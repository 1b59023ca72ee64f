from setuptools import setup, find_packages

setup(
    name="batchconnect",
    version="0.1.0",
    description="Self-contained SLURM scripts from batch-connect app definitions",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    package_data={"batchconnect": ["templates/*.j2"]},
    include_package_data=True,
    python_requires=">=3.8",
    install_requires=[
        "jinja2>=3.0",
        "PyYAML>=5.4",
        "pydantic>=2.0",
        "typer>=0.9",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "console_scripts": [
            "batchconnect=batchconnect.cli:main",
        ],
    },
)
