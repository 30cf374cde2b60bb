from setuptools import setup


with open("README.pypi.md", "r", encoding='UTF-8') as f:
    readme = f.read()

classifiers = [
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3.8",
    "Programming Language :: Python :: 3.9",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: Implementation :: PyPy",
    "Intended Audience :: Developers",
    "Topic :: Software Development :: Libraries",
]

keywords = ("asterisk", "manager", "interface",
            "ajam", "mxml", "asterisk-manager-interface",
            "ami", "asterisk-ami", "ajam-client",
            "asyncio", "async", "http")

setup(
    name='ajam-client',
    version='0.1.0',
    packages=['ajam', 'ajam.client'],
    url='https://github.com/XpycTee/ajam-client',
    license='Apache-2.0 license',
    author='XpycTee',
    author_email='i@xpyctee.ru',
    description='Asynchronous client for the Asterisk manager interface over HTTP (AJAM)',
    long_description=readme,
    long_description_content_type="text/markdown",
    classifiers=classifiers,
    keywords=' '.join(keywords),
    install_requires=['aiohttp', 'yarl', 'multidict'],
    extras_require={
        'test': ['pytest', 'pytest-asyncio'],
    },
    python_requires='>=3.8'
)
