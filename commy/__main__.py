from commy.cli import main

main()
