""" ecladder build script for setuptools.

"""

from setuptools import find_packages, setup  # type: ignore

import ecladder

with open("README.md", "r", encoding="ascii") as file_:
    longdescription = file_.read()

setup(
    name=ecladder.name,
    version=ecladder.__version__,
    license=ecladder.__license__,
    author=ecladder.__author__,
    author_email=ecladder.__author_email__,
    description="Elliptic curve ladder: ECDH, ECDSA, ECIES, and ECBBS",
    long_description=longdescription,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    package_data={"ecladder": ["data/*.json"]},
    install_requires=["dataclasses_json", "pycryptodome"],
    extras_require={"test": ["pytest", "coincurve"]},
    keywords=(
        "elliptic-curves montgomery-ladder curve25519 secp256k1 secp256r1 "
        "ecdh ecdsa ecies RFC-6979 RFC-7748"
    ),
    python_requires=">=3.8",
    classifiers=[
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Natural Language :: English",
        "Operating System :: OS Independent",
        "Topic :: Security :: Cryptography",
        "Topic :: Scientific/Engineering",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
)
