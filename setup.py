from setuptools import find_packages, setup

setup(
    name="configloader",
    version="1.0.0",
    description="Layered application configuration from YAML/JSON/TOML files and environment variables.",
    author="Araray Velho",
    author_email="araray@gmail.com",
    packages=find_packages(include=["configloader", "configloader.*"]),
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2.6",
        "PyYAML",
        "toml",
        "rich",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
)
