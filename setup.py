from setuptools import find_packages, setup

with open('README.md', encoding='utf-8') as readme_file:
    readme = readme_file.read()

install_requires = ['numpy>=1.22', 'pandas>=1.4', 'xlsxwriter>=3.0.3']

setup(name='smp',
      version='0.1',
      description='Stable Marriage Problem solver, stability checker and preference edit assistant',
      long_description=readme,
      long_description_content_type='text/markdown',
      install_requires=install_requires,
      extras_require={'test': ['pytest>=7.0', 'openpyxl>=3.0.9']},
      license='MIT license',
      keywords='smp stable marriage gale shapley',
      packages=find_packages(include=['smp', 'smp.*']),
      python_requires='>=3.8'
     )
