import setuptools

VERSION = '0.1.0'

setup_params = dict(
    name='nethandler',
    version=VERSION,
    author='Kenneth VanderLinde',
    author_email='kwvanderlinde@gmail.com',
    url='https://github.com/kwvanderlinde/nethandler',
    keywords='requests cache http json',
    packages=setuptools.find_packages(exclude=['tests', 'tests.*']),
    package_dir={'nethandler': 'nethandler'},
    include_package_data=True,
    description='A cached, decoding request pipeline for the requests library and Python 3',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    install_requires=['requests>=2.31'],
    extras_require={
        'dev': [
            'mockito>=1.4',
            'pytest>=7.0',
            'pytest-cov>=4.0',
            'ddt>=1.6',
        ]
    },
    entry_points={},
    python_requires='>=3.10',
    classifiers=[
        'Development Status :: 2 - Pre-Alpha',
        'Environment :: Web Environment',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: BSD License',
        'Natural Language :: English',
        'Operating System :: OS Independent',

        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3 :: Only',
    ],
)


if __name__ == '__main__':
    setuptools.setup(**setup_params)
