import json
import os


class ObjectIO:
    """Loads an input deck into a keyword dictionary.

    Two layouts are understood. ``.json`` files hold a keyword dictionary
    directly. ``.inp`` files are positional: the first token of each line is
    the value, and values are matched against ``keywords`` in order. Trailing
    keywords that have no line are left out of the dictionary so that
    callers can fall back on their defaults.
    """
    def __init__(self, FilePath, keywords=None):
        self.FilePath = FilePath
        self.Object = None
        extension = os.path.splitext(FilePath)[1].lower()
        if extension == ".json":
            with open(FilePath, "r") as f:
                self.Object = json.load(f)
        else:
            with open(FilePath, "r") as f:
                self.Object = self.read_positional(f, keywords or [])

    @staticmethod
    def read_positional(stream, keywords):
        values = []
        for line in stream:
            tokens = line.split()
            if tokens:
                values.append(tokens[0])
        if len(values) > len(keywords):
            raise RuntimeError(f"Input deck holds {len(values)} values, but only {len(keywords)} keywords are defined")
        return {keyword: value for keyword, value in zip(keywords, values)}


class DictIO:
    @staticmethod
    def GetEssential(dictionary, *arg):
        dictionary = {key.lower() if isinstance(key, str) else key: value for key, value in dictionary.items()}
        for keyword in arg:
            keyword_lower = keyword.lower() if isinstance(keyword, str) else keyword
            if keyword_lower in dictionary: 
                return dictionary[keyword_lower]
        raise KeyError(f"KeyError: {arg} is not included in the data dictionary!")
    
    @staticmethod
    def GetAlternative(dictionary, keyword, default):
        dictionary = {key.lower() if isinstance(key, str) else key: value for key, value in dictionary.items()}
        keyword_lower = keyword.lower() if isinstance(keyword, str) else keyword
        if keyword_lower in dictionary:
            return dictionary[keyword_lower]
        return default
