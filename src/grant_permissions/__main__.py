from grant_permissions.cli import run

if __name__ == "__main__":
    run()
