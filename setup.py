from setuptools import find_packages, setup

__title__ = "requests_auth0"
__description__ = "An Auth0 Authorization Code flow client for Python, built on requests."
__version__ = "0.1.0"
__license__ = "Apache 2.0"

with open("README.rst", "rt") as finput:
    readme = finput.read()

with open("requirements.txt", "rt") as finput:
    requires = [line.strip() for line in finput.readlines() if line.strip()]

with open("requirements-test.txt", "rt") as finput:
    test_requires = [line.strip() for line in finput.readlines() if line.strip()]

setup(
    name=__title__,
    version=__version__,
    description=__description__,
    long_description=readme,
    long_description_content_type="text/x-rst",
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"": ["requirements.txt", "requirements-test.txt"]},
    include_package_data=True,
    python_requires=">=3.8",
    install_requires=requires,
    extras_require={"flask": ["flask"], "test": test_requires},
    license=__license__,
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: Apache Software License",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: Implementation :: CPython",
    ],
)
