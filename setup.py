import os
import sys
from setuptools import setup, find_packages

if sys.version_info[:2] < (3, 8):
    error = (
        "Tucker3 requires Python 3.8 or later (%d.%d detected). \n" % sys.version_info[:2]
    )
    sys.stderr.write(error + "\n")
    sys.exit(1)


name = "tucker3"
description = "Tucker3 Tensor Decomposition"
authors = {
    "Aksoy": ("Doruk Aksoy", "doruk@umich.edu"),
    "Gorodetsky": ("Alex Gorodetsky", "goroda@umich.edu"),
}

maintainer = "Alex Gorodetsky"
maintainer_email = "goroda@umich.edu"
url = None
platforms = ["Linux", "Mac OSX"]
keywords = [
    "Tensor Decomposition",
    "Tucker",
    "HOSVD",
    "HOOI",
    "Numerical Linear Algebra",
    "Scientific Computing",
    "Dimensionality Reduction",
]

classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "License :: OSI Approved :: MIT License",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3.8",
    "Programming Language :: Python :: 3.9",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3 :: Only",
    "Topic :: Scientific/Engineering :: Mathematics",
]


def parse_requirements_file(filename):
    with open(filename) as fid:
        requires = [l.strip() for l in fid.readlines() if l.strip() and not l.startswith("#")]
    return requires


try:
    install_requires = parse_requirements_file("requirements.txt")
except FileNotFoundError:
    install_requires = ["numpy>=1.20.0"]

extras_require = {
    "test": ["pytest"],
}

with open("README.org") as fh:
    long_description = fh.read()

# Get version number
with open(os.path.join("tucker3", "__init__.py"), "r") as f:
    for line in f:
        if line.startswith("__version__"):
            version = line.strip().split("=")[1].strip(' "\'')
            break

packages = find_packages(include=["tucker3", "tucker3.*"])

# add the tests subpackage(s)
package_data = {
    "tucker3": ["tests/*.py"],
}

if __name__ == "__main__":
    setup(
        name=name,
        version=version,
        maintainer=maintainer,
        maintainer_email=maintainer_email,
        author=authors["Gorodetsky"][0],
        author_email=authors["Gorodetsky"][1],
        description=description,
        keywords=keywords,
        long_description=long_description,
        long_description_content_type="text/x-org",
        platforms=platforms,
        url=url,
        classifiers=classifiers,
        packages=packages,
        package_data=package_data,
        install_requires=install_requires,
        extras_require=extras_require,
        python_requires=">=3.8",
        zip_safe=False,
    )
