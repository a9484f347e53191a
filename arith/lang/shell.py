"""Handles interactive/command-line mode for the arith interpreter. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """Arithmetic interpreter shell."""
    intro = "Arithmetic interpreter :: Python backend\nType '?' or 'help' for more information, ^D or 'exit' to quit."
    prompt = "> "

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self.line_num = 0

    COMMANDS = ("help", "?", "exit", "EOF")

    def onecmd(self, line):
        """Only a line that is nothing but a command word runs that command, so 'exit = 5' is still a statement."""
        command = line.strip()
        if not command:
            return self.emptyline()
        elif command in Shell.COMMANDS:
            return super().onecmd(command)
        return self.default(line)

    def default(self, line):
        """Executes arbitrary arith statement."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            result = self.sess.execute(line, self.line_num)

            if result is not None:
                print(result)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the arith interpreter!\n\n"
              "Type an expression built from natural numbers, variables, '+', '*' and \n"
              "parentheses to see its value: '2 + 3 * 4' gives 14. Multiplication binds \n"
              "tighter than addition.\n\n"
              "Try binding a value to a name by typing 'x = 7'. Nothing is printed, but \n"
              "'x + 1' will now give 8. Bindings last until the interpreter exits.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
