# setup.py
from setuptools import setup, find_packages

setup(
    name="klisp",
    version="0.1.0",
    description="An embedded S-expression language for transforming transaction tables",
    packages=find_packages(include=["klisp", "klisp.*", "klisp_lsp", "klisp_lsp.*"]),
    python_requires=">=3.11",
    install_requires=[
        "pygls>=2.0",
        "lsprotocol>=2023.0.1",
    ],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    entry_points={
        "console_scripts": [
            "klisp=klisp.repl:main",
            "klisp-ls=klisp_lsp.server:main",
        ],
    },
    zip_safe=False,
)
