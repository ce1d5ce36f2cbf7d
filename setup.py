__AUTHOR__ = 'mongit contributors'
__VERSION__ = '1.0.0'
__LICENSE__ = 'GPLv3'

import re
from pathlib import Path

from setuptools import find_namespace_packages, setup

with open(Path(__file__).parent / 'README.md') as f:
    lines = f.readlines()
    filtered = [
        x for x in lines
        if not re.match(r'^[\[!]{2}', x) and len(x) > 0
    ]
    readme = ''.join(filtered)

with open(Path(__file__).parent / 'requirements.txt') as f:
    requirements = f.read()

package_data = {
    'mongit.data': ['*.toml'],
}

setup(
    name='mongit',
    python_requires=">=3.10",
    version=__VERSION__,
    license=__LICENSE__,
    author=__AUTHOR__,
    maintainer=__AUTHOR__,
    description='Snapshot and restore MongoDB databases with git.',
    long_description=readme.split('## Installation')[0].split('# mongit')[-1].strip(),
    long_description_content_type='text/markdown',
    package_dir={'': 'src'},
    packages=find_namespace_packages(where='src'),
    package_data=package_data,
    entry_points={
        'console_scripts': ['mongit=mongit.run:main'],
    },
    install_requires=requirements,
    extras_require={
        'test': ['pytest'],
    },
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'Topic :: Database',
        'License :: OSI Approved :: GNU General Public License v3 (GPLv3)',
        'Programming Language :: Python :: 3',
    ],
)
