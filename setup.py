import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="BeachlineVT",
    version="1.0.0",
    description="Voronoi Tessellation using Fortune's sweep-line algorithm with a beach line tree",
    long_description=long_description,
    long_description_content_type="text/markdown",
	packages=["BeachlineVT"],
	package_dir={"BeachlineVT": "BeachlineVT"},
	scripts=['bin/pl_VT.py','bin/bvt.py'],
    classifiers=[
        "Programming Language :: Python :: 3",
		"License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
        "Operating System :: OS Independent",
    ],
	install_requires=["numpy", "astropy", "matplotlib", "numba", "tqdm"],
	extras_require={"test": ["pytest"]},
    python_requires='>=3.8',
)
