"""Handles interactive/command-line mode for the herlang interpreter. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """herlang interpreter shell."""
    intro = "herlang interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = ">> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = ">> "      # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0

    def onecmd(self, line):
        """Sends every line to default, so that keywords such as help or exit can still appear inside a program."""
        if line in ("EOF", "exit", "help", "?"):
            return super().onecmd(line)
        return self.default(line)

    def default(self, line):
        """Executes an arbitrary herlang program line."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            line, add_to_prev = self.sess.preprocess_line(line, self._tmp_line)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
            else:
                self._tmp_line = ""
                self.prompt = self._tmp_prompt

                try:
                    self.sess.add(line, self.line_num)
                except ValueError:
                    return  # if line is empty, terminate

                self.sess.run()

                while self.sess.results:
                    print(self.sess.pop())

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the herlang interpreter!\n\n"
              "herlang is a small dynamically typed language with integers, strings, arrays, hashes and closures.\n"
              "Every keyword has a localized spelling as well, so 'let' can be written '宝宝你是一个' and 'fn' as '想要你一个态度'.\n\n"
              "Try it out by typing 'let add = fn(x, y) { x + y };'. This will bind a function to the name 'add'.\n"
              "Next, try typing 'add(1, 2)', which gives 3. Lines with an open bracket continue on the next line.\n"
              "Type 'exit' or press Ctrl-D to leave.")

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
