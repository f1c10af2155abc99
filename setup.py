import os.path
import re
import setuptools


def find_version(filename):
    with open(filename) as f:
        text = f.read()
    match = re.search(r"^_version_str = '(.*)'$", text, re.MULTILINE)
    if not match:
        raise RuntimeError('cannot find version')
    return match.group(1)


tld = os.path.abspath(os.path.dirname(__file__))
version = find_version(os.path.join(tld, 'dogecoinx', '__init__.py'))


setuptools.setup(
    name='dogecoinX',
    version=version,
    python_requires='>=3.8',
    packages=['dogecoinx'],
    install_requires=['attrs'],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': ['dogecoinx-handshake=dogecoinx.cli:main'],
    },
    long_description=(
        'Dogecoin network protocol message codecs and a version/verack handshake driver.'
    ),
)
