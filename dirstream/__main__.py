from dirstream.cli import main

main()
