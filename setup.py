import os, setuptools
dir_path = os.path.dirname(os.path.realpath(__file__))
with open( os.path.join(dir_path,'requirements.txt') ) as f:
    required_packages = f.read().splitlines()
with open(os.path.join(dir_path,'README.md'), "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name='tsrep',
    version='0.3.0',
    description='Representative periods and weight matrices for energy system optimization models',
    long_description=long_description,
    long_description_content_type="text/markdown",
    include_package_data=True,
    package_dir={'': 'src'},
    packages=setuptools.find_packages(where='src'),
    python_requires='>=3.9',
    install_requires=required_packages,
    extras_require={'test': ['pytest']},
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: MIT License',
        'Natural Language :: English',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Topic :: Scientific/Engineering :: Mathematics',
        'Topic :: Software Development :: Libraries :: Python Modules' ],
    keywords=['clustering', 'optimization', 'representative periods'],
)
