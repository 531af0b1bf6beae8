from dbcopy.cli import main

main()
