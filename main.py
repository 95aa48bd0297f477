from rich.pretty import pprint

from sextant import *

parser = Parser("test", "A test program to test option parsing.")

filename = parser.positional("filename", "The name of the file to ignore")
stuff = parser.optional("stuff", "Other stuff", default="default stuff")
some_option = parser.option("some-option", "s", (
    "Some option, which has a very long description with paragraphs and everything.\n"
    "\n"
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit, sed do eiusmod tempor incididunt."
))
some_def = parser.option("some-def", descr="Some option with default", default="the default")
a_flag = parser.flag("a-flag", "f", "A very important flag")
another_flag = parser.flag("another-flag", descr="A less important flag")


if __name__ == '__main__':
    invoke(parser)
    pprint({
        "filename": filename.value,
        "stuff": stuff.value,
        "some-option": some_option.value,
        "some-def": some_def.value,
        "a-flag": a_flag.value,
        "another-flag": another_flag.value,
    })
