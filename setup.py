"""
Setup file.
"""

from setuptools import find_packages, setup

KEYWORDS = "build system c c++ compiler linker archiver dependency graph compile_commands"


if __name__ == "__main__":
    setup(
        name="buldr",
        version="0.1.0",
        description="Declarative build orchestrator for C/C++ projects",
        keywords=KEYWORDS,
        package_dir={"": "src"},
        packages=find_packages(where="src"),
        python_requires=">=3.11",
        install_requires=["networkx>=3.0"],
        extras_require={"test": ["pytest>=7"]},
        entry_points={"console_scripts": ["buldr=buldr.cli:main"]},
        include_package_data=True)
