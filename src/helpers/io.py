'''
File system helpers
'''
import os
import errno


def mkdir_p(path):
    '''
    Equivalent to mkdir -p
    '''
    try:
        os.makedirs(path)
    except OSError as exc:
        if exc.errno == errno.EEXIST and os.path.isdir(path):
            pass
        else:
            raise exc


def append_text(path, text):
    '''
    Appends text to the file at path, creating missing directories
    '''
    directory = os.path.dirname(path)
    if directory:
        mkdir_p(directory)
    with open(path, 'a') as fh:
        fh.write(text)
