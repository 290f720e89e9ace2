#!/usr/bin/env python3
"""
Setup script for the subdomain availability checker.
"""
from setuptools import setup

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="subdomain-checker",
    version="1.0.0",
    author="Subdomain Checker Contributors",
    author_email="",
    description="Async subdomain availability checker with HTTPS/HTTP fallbacks and batched probing",
    long_description=long_description,
    long_description_content_type="text/markdown",
    py_modules=["prober", "batch_scheduler", "subdomain_checker", "cli"],
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Security",
        "Topic :: Internet :: WWW/HTTP",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.8",
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7.0", "pytest-asyncio>=0.21"],
    },
    entry_points={
        "console_scripts": [
            "subdomain-checker=cli:main",
        ],
    },
    keywords="subdomain availability checker security async http",
)
