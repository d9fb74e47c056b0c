"""
Showcase program: `python -m ccli hello --number=7 world`.

Also demonstrates the __main__ hooks read by the renderers (__prog__, __styles__).
"""
from ccli import Interface, ValueKind, Color, echo

__prog__ = "ccli"
__styles__ = {
    "program-name": "bold #FFD600",
}


def build(**options):
    cli = Interface("ccli", descr="Simple CLI showcasing ccli", **options)

    @cli.command("hello", descr="greet someone a number of times")
    def hello(interface):
        times, _ = interface.get_int("--number")
        target, _ = interface.get_arg_string("name")
        loud, _ = interface.get_flag("--loud")
        greeting = "HELLO %s!" % target.upper() if loud else "hello %s" % target
        for _ in range(times):
            echo(greeting, Color.GREEN, stream=interface.stream)
        return times

    hello.option("--number", "-n", kind=ValueKind.NUMBER, default=3, descr="how many greetings")
    hello.option("--loud", "-l", descr="shout the greeting")
    hello.argument("name", kind=ValueKind.STRING, descr="who to greet")

    @cli.command("check", descr="print whether a toggle is on")
    def check(interface):
        enabled, found = interface.get_boolean("--enabled")
        echo("enabled" if enabled else "disabled" if found else "unset", Color.CYAN, stream=interface.stream)
        return enabled

    check.option("--enabled", "-e", kind=ValueKind.BOOLEAN, descr="true/false or t/f")
    return cli


if __name__ == "__main__":
    build().run()
