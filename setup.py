from setuptools import setup, find_packages

setup(
    name="restlab-cli",
    version="0.1.0",
    description="Self-contained CLI for RESTLab API collections (import/export/send)",
    packages=find_packages(include=["restlab_cli", "restlab_cli.*"]),
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=["InquirerPy", "tqdm", "httpx", "pydantic>=2"],
    extras_require={"test": ["pytest"]},
    entry_points={
        "console_scripts": [
            "restlab=restlab_cli.__main__:main",
        ]
    },
)
