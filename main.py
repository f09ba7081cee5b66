from rich.pretty import pprint

from argosy import *


class Greeter(ParameterProvider):
    def on_declare_parameters(self):
        self.verbose = self.define_flag_parameter("--verbose", "-v", "show more output")
        self.name = self.define_string_parameter("--name", "-n", "who to greet", required=True)
        self.tags = self.define_string_list_parameter("--tag", description="label, repeatable")
        self.times = self.define_integer_parameter("--times", description="repetitions", default=1)
        self.level = self.define_option_parameter(
            "--level",
            description="greeting style",
            options=("low", "high"),
            default="low"
        )


if __name__ == '__main__':
    greeter = invoke(Greeter(prog="greeter", shell=True, colorful=True))
    pprint(greeter.parameters)
    for _ in range(greeter.times.value):
        print(("Hello" if greeter.level.value == "low" else "HELLO") + ", " + greeter.name.value)
