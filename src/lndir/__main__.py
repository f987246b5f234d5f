from lndir.cli import lndir

if __name__ == "__main__":
    lndir(prog_name="lndir")
