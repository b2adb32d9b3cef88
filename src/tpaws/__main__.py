from tpaws.cli import main

main()
