from setuptools import setup, find_packages

with open("README.md", "r") as fh:
    long_description = fh.read()

with open("requirements.txt", "r") as fh:
    reqs = fh.read()

setup(
    name="med-imagemaker",
    version="1.0.0",
    author="Sejin Kim, Michal Kazmierski, Kevin Qu, Vishwesh Ramanathan, Benjamin Haibe-Kains",
    author_email="benjamin.haibe.kains@utoronto.ca",
    description="Make blank placeholder image volumes of any size, geometry and pixel type.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    install_requires=reqs,
    package_dir={"": "src"},
    packages=find_packages("src"),
    extras_require={
        'test': ['pytest'],
    },
    entry_points={'console_scripts': ['imagemaker = imagemaker.cli.__main__:cli',]},
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
        "License :: OSI Approved :: Apache Software License",
        "Development Status :: 4 - Beta"
    ],
    python_requires='>=3.10',
)
